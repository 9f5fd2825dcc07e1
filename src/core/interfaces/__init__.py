"""Interfaces/abstracciones del Core.

Por qué:
- Define contratos (Protocol) que implementan adaptadores concretos.
- Los validadores dependen de abstracciones: se prueban con un directorio
  virtual y un navegador falso.
"""
