"""
Application Layer

Orchestrates domain objects and infrastructure to run a discovery session.

Structure:
- interfaces/: Port interfaces for infrastructure adapters
- services/: Preference store, track queue and the session controller
"""
