"""
Configuration Settings
======================

This module defines the constants of the pretrained networks used
throughout the incepta package for featurization and classification.

These settings mirror the values the frozen graphs were trained with and
are the defaults behind the [image], [inception] and [classify] config sections.
"""


class ImageNetSettings:
    """
    Pre-processing constants for the Inception v3 (inception5h) graph.

    Attributes:
        IMAGE_HEIGHT (int): Input height expected by the network
        IMAGE_WIDTH (int): Input width expected by the network
        MEAN (float): Value subtracted from every pixel channel
        SCALE (float): Multiplier applied after the mean is subtracted
        CHANNELS_LAST (bool): Interleave channels (HWC) rather than planar (CHW)
    """

    IMAGE_HEIGHT = 224
    IMAGE_WIDTH = 224
    MEAN = 117.0
    SCALE = 1.0
    CHANNELS_LAST = True


class InceptionSettings:
    """
    Tensor names inside the Inception v3 frozen graph.

    The output used for transfer learning is the node before the softmax,
    so the activations act as an image feature vector.
    """

    MODEL_FILE = "tensorflow_inception_graph.pb"
    INPUT_TENSOR_NAME = "input"
    OUTPUT_TENSOR_NAME = "softmax2_pre_activation"


class CifarSettings:
    """Constants for the 32x32 CIFAR frozen model."""

    MODEL_FILE = "cifar_model/frozen_model.pb"
    IMAGE_HEIGHT = 32
    IMAGE_WIDTH = 32
    INPUT_TENSOR_NAME = "Input"
    OUTPUT_TENSOR_NAME = "Output"


class ClassifySettings:
    """Defaults for the standalone (no retraining) classifier."""

    INPUT_TENSOR_NAME = "input"
    OUTPUT_TENSOR_NAME = "output"
    MODEL_FILE = "tensorflow_inception_graph.pb"
    LABELS_FILE = "imagenet_comp_graph_label_strings.txt"
    THRESHOLD = 0.3
    MODELS_FOLDER = "DNNModels"
    IMAGES_FOLDER = "ImagesForInference"
    DOWNLOAD_URL = "https://storage.googleapis.com/download.tensorflow.org/models/inception5h.zip"
    DEFAULT_IMAGES = [
        "Jersey-Red.jpg",
        "mug-white.jpg",
        "t-shirt-dotnet-4.0.jpg",
        "green-frisbee.jpg",
    ]
