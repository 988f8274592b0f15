"""docgraph - Depth-tiered documentation corpus validator."""

__version__ = "0.1.0"


# Lazy imports to avoid circular dependencies
def __getattr__(name: str):
    if name == "CorpusAuditor":
        from docgraph.audit.auditor import CorpusAuditor

        return CorpusAuditor
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = ["CorpusAuditor", "__version__"]
