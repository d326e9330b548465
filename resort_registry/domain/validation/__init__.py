"""Field validators.

Import the entity modules directly:
    from resort_registry.domain.validation.employee import check_first_name
    from resort_registry.domain.validation.resort import check_city
"""
