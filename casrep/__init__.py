# CASRep - Close Air Support reporting from JTAC radio transcripts
# Application initialization

# Import utility modules
from casrep.utils import normalizer, splitter, classifier, extractors, parser, reports, correction

# Import models
from casrep.models import report, recognition
