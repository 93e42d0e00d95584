"""
Core Application - shared infrastructure for the messaging apps.

Nothing in here knows about messages or connections. Domain apps build on:

Models (import from core.models):
    - BaseModel: Abstract model with timestamps (created_at, updated_at)

Services (import from core.services):
    - BaseService: Base class for service layer
    - ServiceResult: Standard result wrapper for success/failure handling

Exceptions (import from core.exceptions):
    - ValidationError: Malformed or missing input outside a service call
    - ExternalServiceError: Channel layer / broker failures

Views (import from core.views):
    - health_check: Liveness endpoint for load balancers
"""
