"""Table names of the relational store addressed by the provisioning workflows."""

TENANTS = "tenants"
BRANCHES = "branches"
PROFILES = "profiles"
USER_BRANCHES = "user_branches"
ROLES = "roles"
USER_ROLES = "user_roles"
STAFF = "staff"
STUDENTS = "students"
ACADEMIC_YEARS = "academic_years"
CLASSES = "classes"
SECTIONS = "sections"
