"""Event store module.

Entry point for the host platform is ``EventStoreProviderFactory`` in
``infrastructure.provider_factory``.
"""
