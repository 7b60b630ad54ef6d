"""
Copyright (c) 2018-present HitchedSyringe

This Source Code Form is subject to the terms of the Mozilla Public
License, v. 2.0. If a copy of the MPL was not distributed with this
file, You can obtain one at https://mozilla.org/MPL/2.0/.
"""


from __future__ import annotations

# fmt: off
__all__ = (
    "HTML_ENTITIES",
    "decode",
)
# fmt: on


import re
from typing import Dict


# The provider HTML-encodes everything it returns. We only
# decode the entities it has been seen sending, hence the
# (intentional) lack of a general-purpose HTML unescape.
# Note that &quot; deliberately maps to a single quote.
# fmt: off
HTML_ENTITIES: Dict[str, str] = {
    "&#039;":  "'",
    "&quot;":  "'",
    "&micro;": "µ",
    "&Agrave;": "À",
    "&Aacute;": "Á",
    "&Acirc;":  "Â",
    "&Atilde;": "Ã",
    "&Auml;":   "Ä",
    "&Aring;":  "Å",
    "&agrave;": "à",
    "&aacute;": "á",
    "&acirc;":  "â",
    "&atilde;": "ã",
    "&auml;":   "ä",
    "&aring;":  "å",
    "&AElig;":  "Æ",
    "&aelig;":  "æ",
    "&szlig;":  "ß",
    "&Ccedil;": "Ç",
    "&ccedil;": "ç",
    "&Egrave;": "È",
    "&Eacute;": "É",
    "&Ecirc;":  "Ê",
    "&Euml;":   "Ë",
    "&egrave;": "è",
    "&eacute;": "é",
    "&ecirc;":  "ê",
    "&euml;":   "ë",
    "&#131;":   "ƒ",
    "&Igrave;": "Ì",
    "&Iacute;": "Í",
    "&Icirc;":  "Î",
    "&Iuml;":   "Ï",
    "&igrave;": "ì",
    "&iacute;": "í",
    "&icirc;":  "î",
    "&iuml;":   "ï",
    "&Ntilde;": "Ñ",
    "&ntilde;": "ñ",
    "&Ograve;": "Ò",
    "&Oacute;": "Ó",
    "&Ocirc;":  "Ô",
    "&Otilde;": "Õ",
    "&Ouml;":   "Ö",
    "&ograve;": "ò",
    "&oacute;": "ó",
    "&ocirc;":  "ô",
    "&otilde;": "õ",
    "&ouml;":   "ö",
    "&Oslash;": "Ø",
    "&oslash;": "ø",
    "&#140;":   "Œ",
    "&#156;":   "œ",
    "&#138;":   "Š",
    "&#154;":   "š",
    "&Ugrave;": "Ù",
    "&Uacute;": "Ú",
    "&Ucirc;":  "Û",
    "&Uuml;":   "Ü",
    "&ugrave;": "ù",
    "&uacute;": "ú",
    "&ucirc;":  "û",
    "&uuml;":   "ü",
    "&#181;":   "µ",
    "&Yacute;": "Ý",
    "&#159;":   "Ÿ",
    "&yacute;": "ý",
    "&yuml;":   "ÿ",
    "&deg;":    "°",
    "&amp;":    "&",
    "&ldquo;":  "“",
    "&rdquo;":  "”",
    "&reg;":    "®",
    "&trade;":  "™",
    "&lt;":     "<",
    "&gt;":     ">",
    "&le;":     "≤",
    "&ge;":     "≥",
}
# fmt: on


_ENTITY_REGEX: re.Pattern = re.compile("|".join(map(re.escape, HTML_ENTITIES)))


def decode(text: str) -> str:
    """Replaces every known HTML entity in ``text`` with its literal
    character. Unknown entities are left as-is.

    Replacement happens in a single pass, so ``"&amp;lt;"`` decodes
    to ``"&lt;"`` rather than ``"<"``.
    """
    return _ENTITY_REGEX.sub(lambda m: HTML_ENTITIES[m.group(0)], text)
