"""
WingOps Constants

Centralized constants for magic values, defaults, and configuration.
"""

# Configuration
CONFIG_FILENAME = "wingops.yml"
CONFIG_ENV_VAR = "WINGOPS_CONFIG"
ROOT_ENV_VAR = "WINGOPS_ROOT"

# Default Azure Configuration
DEFAULT_LOCATION = "australiaeast"
DEFAULT_APPLICATION = "wingcompanion"
DEFAULT_BACKUP_TEMPLATE = "infra/bicep/backup.bicep"

# Secret names (Key Vault names cannot contain underscores)
DEFAULT_ADMIN_LOGIN_SECRET = "sql-admin-login"
DEFAULT_ADMIN_PASSWORD_SECRET = "sql-admin-password"
DEFAULT_CONNECTION_STRING_SECRET = "db-connection-string"
DEFAULT_APP_ADMIN_EMAIL_SECRET = "admin-email"
DEFAULT_APP_ADMIN_PASSWORD_SECRET = "admin-password"

# Deployment outputs
EXPECTED_BACKUP_OUTPUTS = ["storageAccountName", "vaultName"]
OPTIONAL_BACKUP_OUTPUTS = [
    "keyVaultName",
    "logAnalyticsWorkspaceName",
    "sqlServerName",
    "actionGroupName",
]

# Report sections: output name -> section
REPORT_SECTION_OUTPUTS = {
    "security": ["keyVaultName", "sqlServerName"],
    "backup": ["storageAccountName", "vaultName"],
    "monitoring": ["logAnalyticsWorkspaceName", "actionGroupName"],
}

PROVISIONING_SUCCEEDED = "Succeeded"

# Backup retention defaults (ISO 8601 durations for ltr-policy)
DEFAULT_WEEKLY_RETENTION = "P4W"
DEFAULT_MONTHLY_RETENTION = "P12M"
DEFAULT_YEARLY_RETENTION = "P5Y"
DEFAULT_WEEK_OF_YEAR = 1

# Coverage
DEFAULT_COVERAGE_THRESHOLD = 80.0
BACKEND_COVERAGE_PATTERN = "coverage.cobertura.xml"
FRONTEND_COVERAGE_PATTERN = "cobertura-coverage.xml"
DEFAULT_FRONTEND_COVERAGE_SCRIPT = "test:coverage"
DEFAULT_FRONTEND_COVERAGE_REPORTER = "cobertura"

# Startup / seeding
DEFAULT_SEED_WAIT_SECONDS = 30
DEFAULT_READY_TIMEOUT_SECONDS = 120
DEFAULT_READY_INTERVAL_SECONDS = 3
DEFAULT_TERMINATE_GRACE_SECONDS = 10
HEALTH_READY_PATH = "/health/ready"
DEFAULT_LOCAL_API_URL = "http://localhost:5000"

# Frontend publishing
STATIC_WEBSITE_CONTAINER = "$web"

# HTTP
HTTP_TIMEOUT_SECONDS = 10
LOGIN_PATH = "/api/auth/login"
ADMIN_ROLE = "Admin"

# Required tools for diagnostics
REQUIRED_TOOLS = ["az", "dotnet", "npm", "git"]

# Exit codes (strictly binary)
EXIT_SUCCESS = 0
EXIT_FAILURE = 1

# Log Configuration
LOG_DATE_FORMAT = "%Y-%m-%d"
LOG_TIME_FORMAT = "%H-%M-%S"
REPORT_TIMESTAMP_FORMAT = "%Y%m%d_%H%M%S"
