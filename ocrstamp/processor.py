"""Sequential batch processor: OCR each image and copy it under its timestamp."""

import logging
import os
from pathlib import Path
from typing import Callable, Iterator, List, Optional, Union

from ocrstamp.errors import FileAccessError, OcrStampError
from ocrstamp.filename import extract_time_token, file_extension, output_filename
from ocrstamp.models import OcrResult, ProgressState, RenamedImage
from ocrstamp.rename_executor import OUTPUT_FOLDER_NAME, copy_image, ensure_output_folder

logger = logging.getLogger(__name__)

ProgressCallback = Callable[[int, int], None]
CompleteCallback = Callable[[], None]
ResultCallback = Callable[[RenamedImage], None]

IMAGE_EXTENSION = ".jpg"


def iter_image_files(
    folder: Union[str, Path],
    extension: str = IMAGE_EXTENSION,
    exclude: Optional[Path] = None
) -> Iterator[Path]:
    """
    Walk a folder recursively and yield files with the given extension.

    Entries are visited in lexical order, with subdirectories entered at their
    sorted position, so repeated walks over an unchanged tree yield the same
    sequence. Symlinked directories are not followed.

    Args:
        folder: Root folder to walk
        extension: Case-sensitive extension to match, including the dot
        exclude: Directory to leave out of the walk

    Raises:
        FileAccessError: If a directory cannot be listed
    """
    folder = Path(folder)
    try:
        names = sorted(os.listdir(folder))
    except OSError as e:
        raise FileAccessError(f"Cannot list {folder}: {e}") from e

    for name in names:
        path = folder / name
        if path.is_dir() and not path.is_symlink():
            if exclude is not None and path == exclude:
                continue
            yield from iter_image_files(path, extension, exclude)
        elif file_extension(name) == extension:
            yield path


def count_image_files(
    folder: Union[str, Path],
    extension: str = IMAGE_EXTENSION,
    exclude: Optional[Path] = None
) -> int:
    """Count the files iter_image_files would yield."""
    return sum(1 for _ in iter_image_files(folder, extension, exclude))


def process_images(
    input_folder: Union[str, Path],
    client,
    on_progress: Optional[ProgressCallback] = None,
    on_complete: Optional[CompleteCallback] = None,
    on_result: Optional[ResultCallback] = None,
    extension: str = IMAGE_EXTENSION,
    output_folder_name: str = OUTPUT_FOLDER_NAME
) -> List[RenamedImage]:
    """
    OCR every image under a folder and copy it into the output folder named by its timestamp.

    The images are counted first, then processed one at a time in the same
    order. The output folder is created on first use and is never walked.
    The first error aborts the batch, leaving the remaining images untouched.

    Args:
        input_folder: Folder to scan recursively
        client: Object with a recognize(path) -> OcrResult method
        on_progress: Called as on_progress(done, total) after every image
        on_complete: Called once, after the last image is processed
        on_result: Called with the RenamedImage of every image before on_progress
        extension: Case-sensitive image extension to match
        output_folder_name: Name of the output folder inside input_folder

    Returns:
        One RenamedImage per processed image, in processing order

    Raises:
        FileAccessError: If a folder cannot be walked or a file read or written
        NetworkError: If an OCR request fails
        ResponseFormatError: If an OCR response cannot be parsed
    """
    input_folder = Path(input_folder)
    output_folder = input_folder / output_folder_name

    state = ProgressState(total=count_image_files(input_folder, extension, exclude=output_folder))
    logger.info(f"Found {state.total} images in {input_folder}")

    results: List[RenamedImage] = []

    try:
        for image_path in iter_image_files(input_folder, extension, exclude=output_folder):
            ocr_result: OcrResult = client.recognize(image_path)

            text = ocr_result.text
            if text is None:
                logger.info(f"No text recognized in {image_path.name}, skipping")
                result = RenamedImage(source=image_path)
            else:
                token = extract_time_token(text)
                if not token:
                    logger.warning(f"No time found in {image_path.name}, copying as {output_filename(token, extension)}")

                ensure_output_folder(input_folder, output_folder_name)
                destination = copy_image(image_path, output_folder / output_filename(token, extension))
                result = RenamedImage(source=image_path, destination=destination, token=token)

            results.append(result)
            if on_result:
                on_result(result)

            state.processed += 1
            if on_progress:
                on_progress(state.processed, state.total)

            if state.finished:
                logger.info(f"Processed {state.processed} images")
                if on_complete:
                    on_complete()
    except OcrStampError as e:
        logger.error(f"Aborting after {state.processed}/{state.total} images: {e}")
        raise

    return results
