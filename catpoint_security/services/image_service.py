"""Image analysis services that decide whether a camera image shows a cat."""

import os
import random
from typing import List, Optional, Tuple

import cv2
import numpy as np

from ..config.defaults import CASCADE_SETTINGS
from ..exceptions import ImageServiceError
from ..logging_config import get_logger
from .error_handler import global_error_handler, ErrorSeverity
from .interfaces import ImageServiceInterface

logger = get_logger("image_service")


class FakeImageService(ImageServiceInterface):
    """Image service that randomly decides whether an image contains a cat."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def image_contains_cat(self, image: np.ndarray, confidence_threshold: float) -> bool:
        return self._random.random() < 0.5


class OpenCVImageService(ImageServiceInterface):
    """Cat detection with an OpenCV Haar cascade cat-face classifier."""

    def __init__(self, cascade_path: Optional[str] = None,
                 scale_factor: float = 1.1,
                 min_neighbors: int = 3,
                 min_size: Tuple[int, int] = CASCADE_SETTINGS["min_size"],
                 max_size: Tuple[int, int] = CASCADE_SETTINGS["max_size"]):
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_detection_size = tuple(min_size)
        self.max_detection_size = tuple(max_size)
        self.blur_kernel_size = CASCADE_SETTINGS["blur_kernel_size"]

        self.cascade_path: Optional[str] = None
        self.haar_cascade = None

        global_error_handler.register_component("image_service")
        self.load_cascade(cascade_path)

    def load_cascade(self, cascade_path: Optional[str] = None) -> None:
        """Load a Haar cascade, defaulting to the cat cascades bundled with OpenCV.

        Raises:
            ImageServiceError: If no usable cascade could be loaded
        """
        if cascade_path:
            candidates = [cascade_path]
        else:
            candidates = [os.path.join(cv2.data.haarcascades, name)
                          for name in CASCADE_SETTINGS["cascade_files"]]

        for path in candidates:
            if not os.path.exists(path):
                logger.debug(f"Cascade file not found: {path}")
                continue

            cascade = cv2.CascadeClassifier(path)
            if cascade.empty():
                logger.warning(f"Cascade file could not be parsed: {path}")
                continue

            self.haar_cascade = cascade
            self.cascade_path = path
            logger.info(f"Loaded Haar cascade from {path}")
            return

        error = ImageServiceError(f"No usable Haar cascade found in {candidates}")
        global_error_handler.handle_error("image_service", error, ErrorSeverity.CRITICAL)
        raise error

    def image_contains_cat(self, image: np.ndarray, confidence_threshold: float) -> bool:
        """Check whether any detection scores at least ``confidence_threshold`` percent."""
        scores = self.score_detections(image)
        contains_cat = any(score >= confidence_threshold for score in scores)

        logger.debug(f"Image scores {scores}, threshold {confidence_threshold}: cat={contains_cat}")
        return contains_cat

    def score_detections(self, image: np.ndarray) -> List[float]:
        """Detect cat faces and return a confidence in percent for each."""
        self._validate_image(image)

        try:
            processed = self._preprocess_frame(image)
            raw_detections = self._detect_with_haar_cascade(processed)
        except cv2.error as e:
            global_error_handler.handle_error("image_service", e, ErrorSeverity.HIGH)
            raise ImageServiceError(f"Image analysis failed: {e}") from e

        frame_h, frame_w = image.shape[:2]
        return [self._confidence(box, frame_w, frame_h) for box in raw_detections]

    def _validate_image(self, image: np.ndarray) -> None:
        if not isinstance(image, np.ndarray):
            raise ImageServiceError(f"Expected a numpy image, got {type(image).__name__}")
        if image.size == 0 or image.ndim not in (2, 3):
            raise ImageServiceError(f"Unsupported image shape {image.shape}")
        if image.ndim == 3 and image.shape[2] not in (3, 4):
            raise ImageServiceError(f"Unsupported channel count {image.shape[2]}")

    def _preprocess_frame(self, frame: np.ndarray) -> np.ndarray:
        """Convert to an equalized grayscale frame for the cascade."""
        if frame.ndim == 3 and frame.shape[2] == 4:
            gray = cv2.cvtColor(frame, cv2.COLOR_BGRA2GRAY)
        elif frame.ndim == 3:
            gray = cv2.cvtColor(frame, cv2.COLOR_BGR2GRAY)
        else:
            gray = frame

        if gray.dtype != np.uint8:
            gray = cv2.convertScaleAbs(gray)

        blurred = cv2.GaussianBlur(gray, (self.blur_kernel_size, self.blur_kernel_size), 0)
        return cv2.equalizeHist(blurred)

    def _detect_with_haar_cascade(self, frame: np.ndarray) -> List[Tuple[int, int, int, int]]:
        detections = self.haar_cascade.detectMultiScale(
            frame,
            scaleFactor=self.scale_factor,
            minNeighbors=self.min_neighbors,
            minSize=self.min_detection_size,
            maxSize=self.max_detection_size,
            flags=cv2.CASCADE_SCALE_IMAGE
        )

        if len(detections) == 0:
            return []
        return [(int(x), int(y), int(w), int(h)) for x, y, w, h in detections]

    def _confidence(self, box: Tuple[int, int, int, int], frame_w: int, frame_h: int) -> float:
        """Score a detection from its centrality and size, in percent.

        Larger detections near the center of the frame score higher.
        """
        x, y, w, h = box
        center_x = x + w // 2
        center_y = y + h // 2

        center_dist = ((center_x - frame_w // 2) ** 2 + (center_y - frame_h // 2) ** 2) ** 0.5
        max_dist = (frame_w ** 2 + frame_h ** 2) ** 0.5
        center_factor = 1.0 - (center_dist / max_dist)

        max_area = self.max_detection_size[0] * self.max_detection_size[1]
        size_factor = min(1.0, (w * h) / max_area)

        confidence = 0.6 + 0.2 * center_factor + 0.2 * size_factor
        return round(max(0.0, min(1.0, confidence)) * 100.0, 2)
