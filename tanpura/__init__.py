"""tanpura - three-voice sustained sample keyboard."""

from tanpura.models import EffectParams, Pitch, PlayOutcome, POLYPHONY

__all__ = ["EffectParams", "Pitch", "PlayOutcome", "POLYPHONY"]
