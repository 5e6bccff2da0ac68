"""
Table and column names in the hosted database. The schemas (and the
row-level access rules on them) live with the remote service; these are
the names this app reads and writes.
"""

PROFILES = "profiles"
USER_ROLES = "user_roles"
CONTRIBUTIONS = "contributions"

PROFILE_COLUMNS = "id, first_name, last_name"
HISTORY_COLUMNS = "id, user_id, created_at, amount, contribution_type"
