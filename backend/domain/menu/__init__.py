"""Menu domain - Korean menu analysis bounded context.

Sub-packages:
- core: entities, value objects, events and exceptions shared by the context
- ocr: extraction of dish names from menu photos
- resolution: mapping a Korean dish name to a structured record
- images: provider-agnostic image search, scoring and validation
"""
