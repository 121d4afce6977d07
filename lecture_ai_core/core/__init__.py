"""
Core genérico del motor de clases narradas.

Contiene las interfaces (Protocols) que desacoplan al orquestador de las
estrategias concretas de generación y de extracción de texto.
"""
