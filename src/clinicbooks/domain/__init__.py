"""Domain layer for clinicbooks application.

Services are imported from their modules (``clinicbooks.domain.account``
and so on) so that the database layer can import ``entities`` without
pulling the services in.
"""
