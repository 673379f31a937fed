import iri.constants
import iri.error
import iri.uri

from iri.builder import Iri
from iri.error import InvalidArgument, InvalidURI, IriError
