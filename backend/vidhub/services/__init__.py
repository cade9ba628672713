"""Service layer.

Services are imported from their own packages
(``vidhub.services.tokens``, ``vidhub.services.sessions``,
``vidhub.services.profiles``) to keep the import graph acyclic:
``vidhub.core.extensions`` depends on the ports defined under
``vidhub.services._shared``.
"""
