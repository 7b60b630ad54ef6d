"""
Quizzical Discord Bot
~~~~~~~~~~~~~~~~~~~~~
A Discord bot that asks you trivia questions.

:copyright: (c) 2018-present HitchedSyringe
:license: MPL-2.0 and AGPL-3.0 (per file), see each file's header.

"""


__title__ = "quizzical"
__author__ = "HitchedSyringe"
__copyright__ = "Copyright (c) 2018-present HitchedSyringe"
__license__ = "MPL-2.0 AND AGPL-3.0-or-later"
__version__ = "1.0.0"


from . import utils as utils
from .bot import *
from .http import *
