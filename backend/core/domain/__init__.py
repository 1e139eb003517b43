"""
core.domain — The moderation core shared by every app's service layer.

Modules
-------
exceptions         Domain exceptions, each tagged with an ``ErrorKind``.
exception_handler  DRF handler mapping ``ErrorKind`` to HTTP responses.
results            Tagged ``Result`` returned by the policy facade.
roles              ``Principal`` plus role capability predicates.
kinds              ``KindDescriptor`` — per-kind workflow configuration.
visibility         Role-ceiling filters, as Python predicates and ``Q`` objects.
ownership          Edit / delete / moderate guard.
ledger             Moderator identity and rejection notes.
repositories       ORM and in-memory storage ports with compare-and-set.
transactions       Compare-and-set status transitions.
cascade            Transactional parent/child deletion.
workflow           The pending/approved/rejected state machine.
policies           ``ModerationPolicy`` facade and the kind registry.
notifications      Synchronous notification creation helper.

Usage from any app::

    from core.domain.kinds import KindDescriptor, Scope
    from core.domain.policies import ModerationPolicy
    from core.domain.repositories import DjangoRepository
"""
