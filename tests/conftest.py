import collections, sys, types

import lxml.etree
import pytest

from soapgen.source import DocumentSource
from soapgen.wsdl import WsdlParser

WSDL_URL = 'http://example.com/items?wsdl'

WSDL = '''<?xml version="1.0" encoding="UTF-8"?>
<wsdl:definitions xmlns:wsdl="http://schemas.xmlsoap.org/wsdl/"
                  xmlns:soap="http://schemas.xmlsoap.org/wsdl/soap/"
                  xmlns:xs="http://www.w3.org/2001/XMLSchema"
                  xmlns:ns="urn:items"
                  targetNamespace="urn:items">
  <wsdl:types>
    <xs:schema targetNamespace="urn:items">
{schema}
    </xs:schema>
  </wsdl:types>
{body}
</wsdl:definitions>
'''

XSD = '''<?xml version="1.0" encoding="UTF-8"?>
<xs:schema xmlns:xs="http://www.w3.org/2001/XMLSchema" {attributes}>
{body}
</xs:schema>
'''

ITEMS_SCHEMA = '''
      <xs:complexType name="ItemRequest">
        <xs:sequence>
          <xs:element name="id" type="xs:string"/>
          <xs:choice>
            <xs:element ref="ns:Extra"/>
          </xs:choice>
        </xs:sequence>
      </xs:complexType>
      <xs:complexType name="ExtraType">
        <xs:sequence>
          <xs:element name="note" type="xs:string"/>
        </xs:sequence>
      </xs:complexType>
      <xs:element name="ItemRequest" type="ns:ItemRequest"/>
      <xs:element name="Extra" type="ns:ExtraType"/>
'''

ITEMS_BODY = '''
  <wsdl:message name="GetItem">
    <wsdl:part name="Request" element="ns:ItemRequest"/>
  </wsdl:message>
  <wsdl:portType name="ItemsPort">
    <wsdl:operation name="GetItem">
      <wsdl:input message="ns:GetItem"/>
    </wsdl:operation>
  </wsdl:portType>
  <wsdl:binding name="ItemsBinding" type="ns:ItemsPort">
    <soap:binding style="document" transport="http://schemas.xmlsoap.org/soap/http"/>
    <wsdl:operation name="GetItem">
      <soap:operation soapAction="urn:items/GetItem"/>
      <wsdl:input><soap:body use="literal"/></wsdl:input>
    </wsdl:operation>
  </wsdl:binding>
  <wsdl:service name="Items">
    <wsdl:port name="ItemsSoap" binding="ns:ItemsBinding">
      <soap:address location="http://example.com/items"/>
    </wsdl:port>
  </wsdl:service>
'''


def make_wsdl(schema='', body=''):
    return WSDL.format(schema=schema, body=body)


def make_xsd(body='', target_namespace=None):
    attributes = ''
    if target_namespace is not None:
        attributes = 'targetNamespace="{}"'.format(target_namespace)
    return XSD.format(attributes=attributes, body=body)


class MemorySource(DocumentSource):
    """Serves documents from a dict and counts how often each is fetched."""

    def __init__(self, documents=None):
        super().__init__()
        self.documents = dict(documents or {})
        self.fetched = collections.Counter()

    def resolve(self, location, base=None):
        if location in self.documents:
            return location
        return DocumentSource.resolve(location, base)

    def fetch(self, identifier):
        self.fetched[identifier] += 1
        try:
            text = self.documents[identifier]
        except KeyError:
            raise FileNotFoundError(identifier) from None
        return lxml.etree.fromstring(text.encode('utf-8'), base_url=identifier)


@pytest.fixture
def memory_source():
    return MemorySource()


@pytest.fixture
def parse(memory_source):
    def parse(schema='', body='', documents=None, **kwargs):
        memory_source.documents[WSDL_URL] = make_wsdl(schema, body)
        memory_source.documents.update(documents or {})
        return WsdlParser(memory_source, **kwargs).parse(WSDL_URL)
    return parse


@pytest.fixture
def load_module(monkeypatch):
    """Execute generated source as a real module so dataclasses can resolve it."""
    def load_module(text, name='generated_types'):
        module = types.ModuleType(name)
        monkeypatch.setitem(sys.modules, name, module)
        exec(compile(text, name, 'exec'), module.__dict__)
        return module
    return load_module
