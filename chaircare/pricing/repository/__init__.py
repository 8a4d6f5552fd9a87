from .base import RuleRepository  # noqa
from .memory import InMemoryRuleRepository  # noqa
from .yaml_store import YamlRuleRepository  # noqa
