from .user import User
from .template import Template
from .processing_result import ProcessingResult
# base and mixins are imported by the above as needed
