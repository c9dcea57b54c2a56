from .builder import Alias, Builder, Primitive, Record
from .emitter import Emitter
from .errors import FetchError, NamespaceError, SoapGenError, UnresolvedReference
from .source import DocumentSource
from .table import TypeTable
from .wsdl import Wsdl, WsdlParser


def generate(wsdl, sink, source=None):
    """Parse `wsdl` and write the generated module to the file-like `sink`."""
    builder = WsdlParser(source).parse(wsdl).build()
    Emitter(builder).write(sink)
    return builder
