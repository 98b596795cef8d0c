"""Core building blocks for the AI Photo Generator.

Modules
-------
config
    Pydantic Settings configuration loaded from the environment.
errors
    Error taxonomy and bilingual JSON envelopes.
image_client
    Narrow interface to the upstream image-generation API.
language
    Bangla script detection.
variation
    Variation tags, tagged prompts and output filenames.
"""
