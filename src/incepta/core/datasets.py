"""
Sample Files
============

Reading tab-separated sample files with pandas.

Each line holds an image path (relative to an images folder) and a label:

    broccoli.jpg	food
    teddy2.jpg	teddy

There is no header row.
"""

from pathlib import Path
from typing import List, Optional, Union

import pandas as pd

from incepta.core.logger import get_logger
from incepta.models.image import ImageData

logger = get_logger(__name__)


def read_image_data(
    filepath: Union[str, Path],
    images_folder: Optional[Union[str, Path]] = None,
    separator: str = "\t",
    has_header: bool = False,
) -> List[ImageData]:
    """
    Read sample records from a tab-separated file.

    Args:
        filepath: Path to the .tsv file
        images_folder: If given, image paths are joined onto this folder
        separator: Column separator
        has_header: Skip the first line

    Returns:
        Sample records in file order

    Raises:
        FileNotFoundError: If the file does not exist
    """
    path = Path(filepath)
    if not path.exists():
        raise FileNotFoundError(f"Sample file not found: {filepath}")

    try:
        df = pd.read_csv(
            path,
            sep=separator,
            header=0 if has_header else None,
            names=["ImagePath", "Label"],
            index_col=False,
            dtype=str,
            keep_default_na=False,
            encoding="utf-8",
        )
    except pd.errors.EmptyDataError:
        df = pd.DataFrame(columns=["ImagePath", "Label"])

    samples = []
    for image_path, label in zip(df["ImagePath"], df["Label"]):
        if not isinstance(image_path, str) or not image_path.strip():
            continue
        image_path = image_path.strip()
        label = label.strip() if isinstance(label, str) and label.strip() else None
        if images_folder is not None:
            image_path = str(Path(images_folder) / image_path)
        samples.append(ImageData(image_path=image_path, label=label))

    logger.debug(f"Read {len(samples)} samples from {path}")
    return samples
