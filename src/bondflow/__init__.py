"""
bondflow — событийный конвейер fixed income торгового деска.

Цепочка сервисов:
- prices → pricing → algo streaming → streaming
- market data → algo execution → execution → trade booking → position → risk
- inquiries → inquiry

Все сервисы синхронные, in-process, связываются один раз при старте
(см. bondflow.pipeline).
"""

__version__ = "0.1.0"
