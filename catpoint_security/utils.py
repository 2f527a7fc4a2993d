"""Utility functions for the security system."""

import os

import cv2
import numpy as np

from .exceptions import ImageServiceError


def ensure_directory_exists(path: str) -> None:
    """Ensure a directory exists, create if it doesn't."""
    if not os.path.exists(path):
        os.makedirs(path, exist_ok=True)


def load_image(image_path: str) -> np.ndarray:
    """Read an image file into a BGR numpy array.

    Raises:
        ImageServiceError: If the file is missing or not a readable image
    """
    if not os.path.isfile(image_path):
        raise ImageServiceError(f"Image file not found: {image_path}")

    image = cv2.imread(image_path, cv2.IMREAD_COLOR)
    if image is None:
        raise ImageServiceError(f"Could not decode image: {image_path}")
    return image

