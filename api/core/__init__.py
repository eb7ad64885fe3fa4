"""
Shared, cross-cutting code for the API.

`core/` holds small building blocks that every feature uses
(DB wiring, settings, logging, errors, the response envelope). Keep
resource-specific SQL and business logic in the corresponding feature
package (e.g. `records/`, `catalog/`).
"""
