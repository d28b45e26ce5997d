# Overview: Static route protection and department ACL tables.
# Operators registering a new module add its prefix here; nothing else
# re-derives these rules.

from .principals import Department


LOGIN_PATH = "/login"
HOME_PATH = "/dashboard"


# -- PROTECTED ROUTES --
# Any request whose path falls under one of these prefixes needs a session.

PROTECTED_PREFIXES = (
    "/dashboard",
    "/dashboard/admin",
    "/dashboard/hr",
    "/dashboard/store",
    "/dashboard/ppc",
    "/dashboard/accounts",
    "/dashboard/reports",
)


# -- DEPARTMENT ACL --
# Prefix -> departments a User principal needs. Company principals bypass
# this table. Prefixes missing here (e.g. /dashboard/admin) carry no
# department restriction.

DEPARTMENT_ACCESS = {
    "/dashboard/hr": frozenset({Department.HR.value}),
    "/dashboard/store": frozenset({Department.STORE.value}),
    "/dashboard/ppc": frozenset({Department.PPC.value}),
    "/dashboard/accounts": frozenset({Department.ACCOUNTS.value}),
    "/dashboard/reports": frozenset({Department.REPORTS.value}),
}


# -- LANDING PAGES --
# Where a User lands after login or when opening the overview.

DEPARTMENT_LANDING = {
    Department.HR.value: "/dashboard/hr",
    Department.STORE.value: "/dashboard/store",
    Department.PPC.value: "/dashboard/ppc",
    Department.ACCOUNTS.value: "/dashboard/accounts",
    Department.REPORTS.value: "/dashboard/reports",
}
