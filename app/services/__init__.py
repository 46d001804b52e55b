"""
Services layer - Business logic goes here.
Keep services focused on specific domains (reports, reassignments, etc.)

DESIGN PRINCIPLE:
- Services contain business logic, NOT routes
- Authorization is re-checked in the service, inside the transaction
- Services raise app.core.errors exceptions; routes map them to HTTP
"""
