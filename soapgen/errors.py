class SoapGenError(Exception):
    pass

class UnresolvedReference(SoapGenError, LookupError):
    """A namespace-qualified name that is missing from the type table."""
    def __init__(self, qname, kind='type'):
        self.qname = qname
        self.kind = kind
        super().__init__('Could not find {} {}'.format(kind, qname))

class FetchError(SoapGenError, IOError):
    pass

class NamespaceError(SoapGenError, ValueError):
    pass
