"""
API package for the shop admin backend.

Modules:
- config: environment-driven settings
- db: PostgreSQL connection pooling + query helpers
- repositories: per-table data access (CRUD SQL)
- passwords: argon2 password hashing
- auth_utils: session tokens and auth dependencies
- listing: react-admin list parameters (sort/range/filter) and Content-Range
- schemas: Pydantic models for the REST API
- error_handlers: global exception handlers
- observability: logging setup
- routes: one router per resource
"""
