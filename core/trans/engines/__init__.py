"""Translation provider implementations.

Importing this package registers every provider with TransInterface so the provider chain
can build them from the configured engine names.

Modules:
- LibreTranslation: LibreTranslate over HTTP, native source detection.
- MyMemoryTranslation: MyMemory over HTTP, explicit source required.
- DeeplTranslation: DeepL SDK, credentials required.
- GoogleCloudTranslation: Google Cloud Translation v2, credentials required.
"""

from core.trans.engines.trans_deepl import DeeplTranslation
from core.trans.engines.trans_google_cloud import GoogleCloudTranslation
from core.trans.engines.trans_libre import LibreTranslation
from core.trans.engines.trans_mymemory import MyMemoryTranslation

__all__: list[str] = [
    "DeeplTranslation",
    "GoogleCloudTranslation",
    "LibreTranslation",
    "MyMemoryTranslation",
]
