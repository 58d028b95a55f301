from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from botanical_friend.constants import MSG_EXTRACTION_FAILED
from botanical_friend.exceptions import AcquisitionError, ConfigurationError, ExtractionError

if TYPE_CHECKING:
    from botanical_friend.modules.identification.acquisition import ImageAcquisition, ImageSource
    from botanical_friend.modules.identification.extraction import PlantIdentifier
    from botanical_friend.modules.view.state import ViewStateMachine

logger = logging.getLogger(__name__)


class IdentificationService:
    """Drives the main view through one identification: acquire the image, analyze it,
    and end up in HasResult or HasError."""

    def __init__(
        self,
        view: ViewStateMachine,
        acquisition: ImageAcquisition,
        identifier: PlantIdentifier,
    ):
        self.view = view
        self.acquisition = acquisition
        self.identifier = identifier

    async def identify(self, source: ImageSource) -> None:
        # raises if an analysis is already running
        self.view.begin_analysis()
        try:
            image = await self.acquisition.acquire(source, on_preview=self.view.show_preview)
            self.view.show_preview(image.preview)
            plant_data = await self.identifier.analyze(image.payload)
        except AcquisitionError as exc:
            logger.warning(f"Image acquisition failed: {exc.detail}")
            self.view.fail_analysis(exc.user_message)
        except ExtractionError as exc:
            logger.error(f"Plant identification failed: {exc.detail}")
            self.view.fail_analysis(exc.user_message)
        except ConfigurationError as exc:
            logger.critical(f"AI provider not usable: {exc.detail}")
            self.view.fail_analysis(exc.user_message)
        except Exception:
            logger.exception("Unexpected error during plant identification.")
            self.view.fail_analysis(MSG_EXTRACTION_FAILED)
        else:
            self.view.complete_analysis(plant_data)
        finally:
            # cancellation must not leave the view stuck in Analyzing
            if self.view.analyzing:
                self.view.fail_analysis(MSG_EXTRACTION_FAILED)
