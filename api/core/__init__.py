"""
Shared, cross-cutting code for the API.

`core/` should contain small building blocks that every resource uses
(DB wiring, query interpretation, field projection, error classification).
Keep resource-specific SQL and business logic in the corresponding resource
package (e.g. `articles/`).
"""
