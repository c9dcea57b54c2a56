import argparse, logging, sys

import lxml.etree, requests

from . import schema
from .emitter import Emitter
from .errors import SoapGenError
from .source import DocumentSource
from .wsdl import WsdlParser

log = logging.getLogger(__name__)


def parse_args(argv=None):
    parser = argparse.ArgumentParser(prog='soapgen',
                                     description='Generate Python dataclasses from the types of a WSDL.')
    parser.add_argument('wsdl', help='URL or path of the WSDL')
    parser.add_argument('-o', '--output', help='module to write, stdout when omitted')
    parser.add_argument('--cache-dir', default=DocumentSource.cache_directory,
                        help='where downloaded documents are kept (default: %(default)s)')
    parser.add_argument('--max-depth', type=int, default=schema.MAX_DEPTH,
                        help='how deep includes and imports are followed (default: %(default)s)')
    parser.add_argument('--no-strict', dest='strict', action='store_false',
                        help='skip imports and includes without a schemaLocation')
    parser.add_argument('-v', '--verbose', action='count', default=0)
    return parser.parse_args(argv)


def main(argv=None):
    args = parse_args(argv)
    level = logging.WARNING - 10 * min(args.verbose, 2)
    logging.basicConfig(level=level, format='%(levelname)s %(name)s: %(message)s')

    parser = WsdlParser(DocumentSource(cache_directory=args.cache_dir),
                        strict=args.strict, max_depth=args.max_depth)
    try:
        builder = parser.parse(args.wsdl).build()
        emitter = Emitter(builder)
        if args.output:
            emitter.save(args.output)
        else:
            sys.stdout.write(emitter.render())
    except (SoapGenError, OSError, requests.RequestException, lxml.etree.XMLSyntaxError) as e:
        log.debug('Generation failed', exc_info=True)
        sys.stderr.write('error: {}\n'.format(e))
        return 1
    return 0


if __name__ == '__main__':
    sys.exit(main())
