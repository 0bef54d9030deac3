"""Well-known system accounts and groups.

These names are protected from purging regardless of their ids or any
manifest configuration. The sets are immutable and are injected into each
ExemptionPolicy, so callers can substitute their own.
"""

# Accounts present on practically every Unix-like system
SYSTEM_USERS: frozenset[str] = frozenset(
    {
        "root",
        "nobody",
        "bin",
        "noaccess",
        "daemon",
        "sys",
    }
)

# Groups present on practically every Unix-like system
SYSTEM_GROUPS: frozenset[str] = frozenset(
    {
        "root",
        "nobody",
        "bin",
        "noaccess",
        "daemon",
        "sys",
        "adm",
        "lp",
        "mail",
        "wheel",
    }
)
