"""Athena table columns.

The compiler selects exactly these columns in this order and the row
decoder reads cells by the same positions, so both sides import them from
here.
"""

EVENT_COLUMNS: tuple[str, ...] = (
    "id",
    "eventtype",
    "realmid",
    "realmname",
    "clientid",
    "userid",
    "sessionid",
    "ipaddress",
    "error",
    "time",
    "detailsjson",
)

ADMIN_EVENT_COLUMNS: tuple[str, ...] = (
    "id",
    "time",
    "realmid",
    "realmname",
    "operationtype",
    "resourcetype",
    "resourcepath",
    "representation",
    "error",
    "authrealmid",
    "authrealmname",
    "authclientid",
    "authuserid",
    "authipaddress",
    "detailsjson",
)

EVENT_COLUMN_INDEX: dict[str, int] = {
    name: position for position, name in enumerate(EVENT_COLUMNS)
}
ADMIN_EVENT_COLUMN_INDEX: dict[str, int] = {
    name: position for position, name in enumerate(ADMIN_EVENT_COLUMNS)
}
