from .context import PricingCalculation, PricingContext, PricingPolicyConfig, Urgency  # noqa
from .pricing_engine import PricingEngine, calculate_job_pricing  # noqa
from .snapshot import RuleSnapshot, load_rule_snapshot  # noqa
