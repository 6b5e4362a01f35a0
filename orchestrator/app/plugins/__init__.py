"""Plugins keyed by the pod group policy source they serve."""

from orchestrator.app.plugins.coscheduling import Coscheduling

PLUGIN_REGISTRY = {
    # scheduler-plugins coscheduling
    "coscheduling": Coscheduling,
}
