"""
Events module for the Shop Service.

Producers (event_producers):
    - ShopEventProducer: publishes ProductMessage on store_control after a create

Consumers (event_consumers):
    - ProductStatusHandler: applies store_status quantities to the catalog
    - ShopEventConsumer: subscribes the handler to store_status
"""
