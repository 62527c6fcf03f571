# FILE: featurefile/metrics/counters.py
# ------------------------------------------------------------------------------
class Metrics:
    def __init__(self):
        self.files_decoded = 0
        self.files_failed = 0
        self.features_skipped = 0
        self.frames_decoded = 0

    def inc_decoded(self, frames: int = 0):
        self.files_decoded += 1
        self.frames_decoded += max(0, frames)

    def inc_failed(self): self.files_failed += 1
    def inc_skipped(self, by: int = 1): self.features_skipped += by

    def as_dict(self):
        return {
            "files_decoded": self.files_decoded,
            "files_failed": self.files_failed,
            "features_skipped": self.features_skipped,
            "frames_decoded": self.frames_decoded,
        }
