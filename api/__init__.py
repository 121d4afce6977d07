"""
API HTTP para lecture-ai-core.

Esta capa expone endpoints REST que usan el core interno (lecture_ai_core.engine)
para generar clases narradas a partir de documentos.

La API está diseñada para ser consumida por:
- El front-end estático en `public/`
- Clientes externos
- Scripts de automatización
"""
