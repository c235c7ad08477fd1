from benefitpoint.wizard.flow import PlanWizard, ReplacePlanConfig
from benefitpoint.wizard.session import WizardSession, WizardStep

__all__ = ["PlanWizard", "ReplacePlanConfig", "WizardSession", "WizardStep"]
