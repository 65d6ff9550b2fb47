# notifications/signals/__init__.py

from . import issues  # noqa
from . import notes  # noqa
from . import pipelines  # noqa
