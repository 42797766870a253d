from .config import config
from .doctor import doctor
from .gyp import gyp
from .log import log
from .provision import provision
from .resolve import resolve
from .version import version
