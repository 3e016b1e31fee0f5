"""
Constants used throughout Volcop.

Defaults for the backup root, the helper container and runtime timeouts.
Every value here can be overridden through BackupSettings.
"""

# Version information
VERSION = "1.0.0"

# Backup paths
DEFAULT_BACKUP_DIR = "volcop_backup"
ARCHIVE_FILENAME = "content.tar"
DEFAULT_DIRECTORY_MODE = 0o755

# Helper container
HELPER_IMAGE = "alpine"
HELPER_COMMAND = ["sleep", "5"]
HELPER_WAIT_CONDITION = "not-running"

# Timeouts (in seconds)
HELPER_WAIT_TIMEOUT = 60

# Copy-out streaming
COPY_CHUNK_SIZE = 2 * 1024 * 1024

# Environment variables
ENV_PREFIX = "VOLCOP_"

# Logging
LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
LOG_DATE_FORMAT = '%Y-%m-%d %H:%M:%S'
