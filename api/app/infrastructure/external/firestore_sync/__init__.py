"""
Pipeline de sincronización one-way: Firestore -> BigQuery.

Se ejecuta bajo demanda desde el endpoint POST /api/v1/sync-orders.

Objetivos de diseño:
- Idempotencia: insert_id = id del documento, BigQuery deduplica.
- Tolerancia parcial: un lote fallido no aborta la corrida.
- Normalización total: ningún campo malformado puede abortar un sync.
- Clientes de Google inyectados, fáciles de reemplazar en tests.
"""
