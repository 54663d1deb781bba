# This file marks the schemas package for API request and response models.
