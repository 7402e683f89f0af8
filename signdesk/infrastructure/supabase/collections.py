"""Backend table and column names (schema-in-code).

The remote schema is owned by the backend; these constants keep the names
used by repositories in one place. Table names are overridable through
settings (documents_table, signatures_table, settings_table).
"""

TABLE_DOCUMENTS = "documents"
TABLE_DOCUMENT_SIGNATURES = "document_signatures"
TABLE_SETTINGS = "settings"

# Shared columns
COL_ID = "id"
COL_TRAINING_ID = "training_id"
COL_USER_ID = "user_id"
COL_TYPE = "type"
COL_CREATED_AT = "created_at"
COL_CREATED_BY = "created_by"

# document_signatures
COL_SIGNATURE_TYPE = "signature_type"
COL_SIGNATURE_URL = "signature_url"
COL_STORAGE_PATH = "path"
COL_DOCUMENT_ID = "document_id"

# documents
COL_FILE_URL = "file_url"
COL_TITLE = "title"
COL_STATUS = "status"
COL_NEED_STAMP = "need_stamp"

# settings
COL_ORGANIZATION_SEAL_URL = "organization_seal_url"
COL_ORGANIZATION_SEAL_PATH = "organization_seal_path"
