"""
Machine learning components: frozen graph runtime, image transforms,
the transfer-learning pipeline, evaluation and the standalone classifier.
"""
