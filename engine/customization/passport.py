# engine/customization/passport.py
"""
The passport screen shows a preview dummy wearing the currently picked cosmetics.
The dummy has its own hat renderers, separate from any live character's.
"""
from typing import Optional

from engine.customization.character import CharacterCustomization


class PassportManager:
    def __init__(self, dummy: Optional[CharacterCustomization] = None):
        self.dummy = dummy
