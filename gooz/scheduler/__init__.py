"""Layer scheduling across all registered shapes."""

from gooz.scheduler.layer_scheduler import LayerGenerator, LayerScheduler

__all__ = ["LayerGenerator", "LayerScheduler"]
