"""Image analysis services deciding whether a camera frame shows a cat."""

import os
import random
from typing import Any, List, Optional, Tuple

import cv2
import numpy as np
from PIL import Image

from ..config.defaults import CASCADE_SEARCH_DIRS, SYSTEM_CONSTANTS
from ..models.config import SecurityConfig
from ..logging_config import get_logger
from .error_handler import CollaboratorUnavailable
from .interfaces import ImageServiceInterface

logger = get_logger("image_service")


class FakeImageService(ImageServiceInterface):
    """Image service that answers at random, for demos and manual testing."""

    def __init__(self, seed: Optional[int] = None):
        self._random = random.Random(seed)

    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        result = self._random.random() < 0.5
        logger.debug(f"Fake image analysis returned {result}")
        return result


class OpenCVImageService(ImageServiceInterface):
    """Cat detection using the OpenCV Haar cascade for cat faces.

    Accepts numpy arrays (RGB, RGBA or grayscale), Pillow images, or a path
    to an image file. Confidence is expressed in percent.
    """

    def __init__(self,
                 cascade_path: Optional[str] = None,
                 scale_factor: float = 1.1,
                 min_neighbors: int = 3,
                 min_detection_size: Tuple[int, int] = (30, 30),
                 max_detection_size: Tuple[int, int] = (300, 300)):
        self.scale_factor = scale_factor
        self.min_neighbors = min_neighbors
        self.min_detection_size = tuple(min_detection_size)
        self.max_detection_size = tuple(max_detection_size)

        # Preprocessing parameters
        self.blur_kernel_size = 3

        self.cascade_path, self.haar_cascade = self._load_cascade(cascade_path)

    @classmethod
    def from_config(cls, config: SecurityConfig) -> "OpenCVImageService":
        return cls(
            cascade_path=config.cascade_path,
            scale_factor=config.scale_factor,
            min_neighbors=config.min_neighbors,
            min_detection_size=config.min_detection_size,
            max_detection_size=config.max_detection_size
        )

    def _load_cascade(self, cascade_path: Optional[str]) -> Tuple[str, "cv2.CascadeClassifier"]:
        """Load the configured cascade, or the first usable one from the search paths."""
        if cascade_path:
            return cascade_path, self._read_cascade(cascade_path)

        for path in self._cascade_candidates():
            if not os.path.exists(path):
                continue
            try:
                return path, self._read_cascade(path)
            except CollaboratorUnavailable as e:
                logger.warning(str(e))

        raise CollaboratorUnavailable("image_service",
                                      f"no usable {SYSTEM_CONSTANTS['CAT_CASCADE_FILE']} found")

    @staticmethod
    def _cascade_candidates() -> List[str]:
        cascade_file = SYSTEM_CONSTANTS["CAT_CASCADE_FILE"]
        search_dirs = list(CASCADE_SEARCH_DIRS)

        opencv_data_dir = getattr(getattr(cv2, "data", None), "haarcascades", None)
        if opencv_data_dir:
            search_dirs.insert(0, opencv_data_dir)

        return [os.path.join(directory, cascade_file) for directory in search_dirs]

    def _read_cascade(self, cascade_path: str) -> "cv2.CascadeClassifier":
        if not os.path.exists(cascade_path):
            raise CollaboratorUnavailable("image_service", f"cascade file not found: {cascade_path}")

        cascade = cv2.CascadeClassifier(cascade_path)
        if cascade.empty():
            raise CollaboratorUnavailable("image_service", f"failed to load cascade from {cascade_path}")

        logger.info(f"Loaded Haar cascade from {cascade_path}")
        return cascade

    def image_contains_cat(self, image: Any, confidence_threshold: float) -> bool:
        threshold = max(SYSTEM_CONSTANTS["MIN_CONFIDENCE_THRESHOLD"],
                        min(SYSTEM_CONSTANTS["MAX_CONFIDENCE_THRESHOLD"], confidence_threshold))

        gray = self._to_grayscale(image)
        confidences = self.score_detections(gray)

        result = any(confidence >= threshold for confidence in confidences)
        logger.debug(f"Found {len(confidences)} candidate(s), best "
                     f"{max(confidences, default=0.0):.1f}%, threshold {threshold:.1f}%: cat={result}")
        return result

    def score_detections(self, gray: np.ndarray) -> List[float]:
        """Run the cascade on a grayscale frame and return confidences in percent."""
        processed = self._preprocess_frame(gray)

        try:
            detections = self.haar_cascade.detectMultiScale(
                processed,
                scaleFactor=self.scale_factor,
                minNeighbors=self.min_neighbors,
                minSize=self.min_detection_size,
                maxSize=self.max_detection_size,
                flags=cv2.CASCADE_SCALE_IMAGE
            )
        except cv2.error as e:
            raise CollaboratorUnavailable("image_service", f"cascade detection failed: {e}") from e

        frame_h, frame_w = gray.shape[:2]
        return [self._confidence(int(x), int(y), int(w), int(h), frame_w, frame_h)
                for x, y, w, h in detections]

    def _confidence(self, x: int, y: int, w: int, h: int, frame_w: int, frame_h: int) -> float:
        """Score a detection by how large and how central it is."""
        center_x = x + w // 2
        center_y = y + h // 2

        center_dist = ((center_x - frame_w // 2) ** 2 + (center_y - frame_h // 2) ** 2) ** 0.5
        max_dist = (frame_w ** 2 + frame_h ** 2) ** 0.5
        center_factor = 1.0 - (center_dist / max_dist)

        max_area = self.max_detection_size[0] * self.max_detection_size[1]
        size_factor = min(1.0, (w * h) / max_area)

        confidence = 60.0 + 20.0 * center_factor + 20.0 * size_factor
        return max(0.0, min(100.0, confidence))

    def _to_grayscale(self, image: Any) -> np.ndarray:
        if isinstance(image, (str, os.PathLike)):
            frame = cv2.imread(os.fspath(image), cv2.IMREAD_GRAYSCALE)
            if frame is None:
                raise CollaboratorUnavailable("image_service", f"cannot read image {image}")
            return frame

        if isinstance(image, Image.Image):
            return np.asarray(image.convert("L"))

        if isinstance(image, np.ndarray):
            frame = image if image.dtype == np.uint8 else np.clip(image, 0, 255).astype(np.uint8)
            if frame.ndim == 2:
                return frame
            if frame.ndim == 3 and frame.shape[2] == 3:
                return cv2.cvtColor(frame, cv2.COLOR_RGB2GRAY)
            if frame.ndim == 3 and frame.shape[2] == 4:
                return cv2.cvtColor(frame, cv2.COLOR_RGBA2GRAY)
            raise ValueError(f"Unsupported image shape {image.shape}")

        raise TypeError(f"Unsupported image type {type(image).__name__}")

    def _preprocess_frame(self, gray: np.ndarray) -> np.ndarray:
        blurred = cv2.GaussianBlur(gray, (self.blur_kernel_size, self.blur_kernel_size), 0)
        return cv2.equalizeHist(blurred)
