"""
Events module for the Warehouse Service.

Producers (event_producers):
    - WarehouseEventProducer: replies on store_status with the stored quantity

Consumers (event_consumers):
    - StockControlHandler: bootstraps unknown ids and triggers the reply
    - WarehouseEventConsumer: subscribes the handler to store_control
"""
