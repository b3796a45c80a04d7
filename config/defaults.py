"""
Configuration Defaults - Single source of truth for all default values.

The emulator connection strings below are the publicly documented
development keys shipped with the Cosmos DB emulator and Azurite. They
only work against local emulators and are safe to keep in source.

Organization:
    - SeedingDefaults: Import routine behaviour (record count, retries, paths)
    - CosmosDefaults: Document database topology + emulator endpoint
    - StorageDefaults: Blob container / queue topology + Azurite endpoints
    - AppDefaults: Environment name and log level

Usage:
    from config.defaults import CosmosDefaults

    # In Pydantic Field definitions:
    database_name: str = Field(default=CosmosDefaults.DATABASE_NAME, ...)
"""


# =============================================================================
# APPLICATION DEFAULTS
# =============================================================================

class AppDefaults:
    """Host-wide defaults."""

    ENVIRONMENT = "dev"
    LOG_LEVEL = "INFO"
    DEBUG_MODE = False


# =============================================================================
# SEEDING DEFAULTS
# =============================================================================

class SeedingDefaults:
    """Defaults for the resource-ready import routines."""

    RECORD_COUNT = 10
    IMPORT_DIRECTORY = "import"

    # Routine retry policy - 0 keeps one invocation per ready signal
    ROUTINE_RETRIES = 0
    RETRY_DELAY_SECONDS = 1.0

    # Readiness probe
    READINESS_TIMEOUT_SECONDS = 120.0
    READINESS_POLL_INTERVAL_SECONDS = 2.0

    # Record generator
    FAKER_LOCALE = "en_US"
    MIN_REFERENCES = 1
    MAX_REFERENCES = 3


# =============================================================================
# COSMOS DB DEFAULTS
# =============================================================================

class CosmosDefaults:
    """Document database topology and emulator settings."""

    ACCOUNT_NAME = "azcosmos"
    DATABASE_NAME = "appimport"
    CONTAINER_NAME = "cdbimport"
    PARTITION_KEY_PATH = "/filePath"

    EMULATOR_ENABLED = True
    EMULATOR_ENDPOINT = "https://localhost:8081/"
    EMULATOR_CONNECTION_STRING = (
        "AccountEndpoint=https://localhost:8081/;"
        "AccountKey=C2y6yDjf5/R+ob0N8A7Cgv30VRDJIWEHLM+4QDU5DE2nQ9nDuVTqobD4b8mGGyPMbIZnqyMsEcaGQy67XIw/Jw==;"
    )


# =============================================================================
# STORAGE DEFAULTS
# =============================================================================

class StorageDefaults:
    """Storage account topology and Azurite settings."""

    ACCOUNT_NAME = "azstorage"
    BLOB_CONTAINER_NAME = "sabimport"
    QUEUE_NAME = "saqimport"

    EMULATOR_ENABLED = True
    AZURITE_BLOB_ENDPOINT = "http://127.0.0.1:10000/devstoreaccount1"
    AZURITE_QUEUE_ENDPOINT = "http://127.0.0.1:10001/devstoreaccount1"
    EMULATOR_CONNECTION_STRING = (
        "DefaultEndpointsProtocol=http;"
        "AccountName=devstoreaccount1;"
        "AccountKey=Eby8vdM02xNOcqFlqUwJPLlmEtlCDXJ1OUzFT50uSRZ6IFsuFq2UVErCz4I6tq/K1SZFPTOtr/KBHBeksoGMGw==;"
        "BlobEndpoint=http://127.0.0.1:10000/devstoreaccount1;"
        "QueueEndpoint=http://127.0.0.1:10001/devstoreaccount1;"
    )
