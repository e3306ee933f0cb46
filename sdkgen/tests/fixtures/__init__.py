"""Test fixtures for sdkgen tests.

This module provides sample OpenAPI documents for testing compilation, filtering
and pruning.
"""

# Minimal OpenAPI 3.0 spec for basic testing
MINIMAL_OPENAPI_SPEC = {
    'openapi': '3.0.0',
    'info': {'title': 'Minimal API', 'version': '1.0.0'},
    'paths': {},
}

# Organizations and resource types: one tag each, plus an untagged health check
ORGANIZATIONS_SPEC = {
    'openapi': '3.0.3',
    'info': {'title': 'Organizations API', 'version': '2.1.0'},
    'paths': {
        '/v1/organizations/{id}': {
            'get': {
                'operationId': 'getOrganization',
                'tags': ['organizations'],
                'parameters': [
                    {
                        'name': 'id',
                        'in': 'path',
                        'required': True,
                        'schema': {'type': 'string'},
                    }
                ],
                'responses': {
                    '200': {
                        'description': 'The organization',
                        'content': {
                            'application/json': {
                                'schema': {
                                    '$ref': '#/components/schemas/OrganizationDto'
                                }
                            }
                        },
                    },
                    '404': {'description': 'Not found'},
                },
            }
        },
        '/v1/resource-types': {
            'post': {
                'operationId': 'createResourceType',
                'tags': ['resource-types'],
                'requestBody': {
                    'required': True,
                    'content': {
                        'application/json': {
                            'schema': {
                                'type': 'object',
                                'required': ['name'],
                                'properties': {
                                    'name': {'type': 'string'},
                                    'parentResourceTypeId': {'type': 'string'},
                                },
                            }
                        }
                    },
                },
                'responses': {
                    '201': {
                        'description': 'Created',
                        'content': {
                            'application/json': {
                                'schema': {
                                    '$ref': '#/components/schemas/ResourceTypeDto'
                                }
                            }
                        },
                    }
                },
            }
        },
        '/v1/health': {
            'get': {
                'operationId': 'getHealth',
                'responses': {'204': {'description': 'Healthy'}},
            }
        },
    },
    'components': {
        'schemas': {
            'OrganizationDto': {
                'type': 'object',
                'properties': {
                    'id': {'type': 'string'},
                    'name': {'type': 'string'},
                    'createdAt': {'type': 'string'},
                    'updatedAt': {'type': 'string'},
                },
            },
            'ResourceTypeDto': {
                'type': 'object',
                'properties': {
                    'id': {'type': 'string'},
                    'name': {'type': 'string'},
                    'parent': {'$ref': '#/components/schemas/ResourceTypeDto'},
                },
            },
            'UnusedDto': {
                'type': 'object',
                'properties': {'value': {'type': 'integer'}},
            },
        }
    },
}

# Petstore-like API with nested shapes, enums, cycles and several tags
PETSTORE_SPEC = {
    'openapi': '3.0.0',
    'info': {
        'title': 'Petstore API',
        'version': '1.0.0',
        'description': 'A sample Petstore API for testing',
    },
    'servers': [{'url': 'https://petstore.example.com/api/v1'}],
    'paths': {
        '/pets': {
            'get': {
                'operationId': 'listPets',
                'summary': 'List all pets',
                'tags': ['pets'],
                'parameters': [
                    {
                        'name': 'limit',
                        'in': 'query',
                        'required': False,
                        'schema': {'type': 'integer', 'format': 'int32'},
                    },
                    {
                        'name': 'X-Request-Id',
                        'in': 'header',
                        'schema': {'type': 'string'},
                    },
                ],
                'responses': {
                    '200': {
                        'description': 'A list of pets',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'array',
                                    'items': {'$ref': '#/components/schemas/Pet'},
                                }
                            }
                        },
                    },
                    'default': {
                        'description': 'Unexpected error',
                        'content': {
                            'application/json': {
                                'schema': {'$ref': '#/components/schemas/Error'}
                            }
                        },
                    },
                },
            },
            'post': {
                'operationId': 'createPet',
                'summary': 'Create a pet',
                'tags': ['pets'],
                'requestBody': {
                    'required': True,
                    'content': {
                        'application/json': {
                            'schema': {'$ref': '#/components/schemas/Pet'}
                        }
                    },
                },
                'responses': {
                    '201': {
                        'description': 'Created',
                        'content': {
                            'application/json': {
                                'schema': {'$ref': '#/components/schemas/Pet'}
                            }
                        },
                    }
                },
            },
        },
        '/pets/{petId}': {
            'parameters': [
                {
                    'name': 'petId',
                    'in': 'path',
                    'required': True,
                    'description': 'The id of the pet',
                    'schema': {'type': 'string'},
                }
            ],
            'get': {
                'operationId': 'showPetById',
                'tags': ['pets'],
                'responses': {
                    '200': {
                        'description': 'Expected response to a valid request',
                        'content': {
                            'application/json': {
                                'schema': {'$ref': '#/components/schemas/Pet'}
                            }
                        },
                    },
                    '404': {
                        'description': 'Not found',
                        'content': {
                            'application/json': {
                                'schema': {'$ref': '#/components/schemas/Error'}
                            }
                        },
                    },
                },
            },
            'delete': {
                'operationId': 'deletePet',
                'tags': ['pets'],
                'responses': {'204': {'description': 'Deleted'}},
            },
        },
        '/store/inventory': {
            'get': {
                'operationId': 'getInventory',
                'tags': ['store'],
                'responses': {
                    '200': {
                        'description': 'Inventory by status',
                        'content': {
                            'application/json': {
                                'schema': {'$ref': '#/components/schemas/Inventory'}
                            }
                        },
                    }
                },
            }
        },
        '/users/{userId}/pets/{petId}': {
            'get': {
                'operationId': 'UsersController_getUserPet',
                'tags': ['users', 'pets'],
                'parameters': [
                    {
                        'name': 'petId',
                        'in': 'path',
                        'required': True,
                        'schema': {'type': 'string'},
                    },
                    {
                        'name': 'userId',
                        'in': 'path',
                        'required': True,
                        'schema': {'type': 'string'},
                    },
                ],
                'responses': {
                    '200': {
                        'description': 'The pet of a user',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'object',
                                    'properties': {
                                        'pet': {'$ref': '#/components/schemas/Pet'},
                                        'since': {
                                            'type': 'string',
                                            'format': 'date-time',
                                        },
                                        'owner': {
                                            'type': 'object',
                                            'properties': {
                                                'name': {'type': 'string'}
                                            },
                                        },
                                    },
                                }
                            }
                        },
                    }
                },
            }
        },
    },
    'components': {
        'schemas': {
            'Category': {
                'type': 'object',
                'properties': {
                    'id': {'type': 'integer', 'format': 'int64'},
                    'name': {'type': 'string'},
                },
            },
            'Error': {
                'type': 'object',
                'required': ['code', 'message'],
                'properties': {
                    'code': {'type': 'integer', 'format': 'int32'},
                    'message': {'type': 'string'},
                },
            },
            'Inventory': {
                'type': 'object',
                'additionalProperties': {'type': 'integer'},
            },
            'Pet': {
                'type': 'object',
                'required': ['id', 'name'],
                'properties': {
                    'id': {'type': 'integer', 'format': 'int64'},
                    'name': {'type': 'string'},
                    'category': {'$ref': '#/components/schemas/Category'},
                    'status': {
                        'type': 'string',
                        'enum': ['available', 'pending', 'sold'],
                    },
                    'owner': {
                        'type': 'object',
                        'properties': {
                            'name': {'type': 'string'},
                            'address': {
                                'type': 'object',
                                'properties': {'city': {'type': 'string'}},
                            },
                        },
                    },
                    'tags': {
                        'type': 'array',
                        'items': {
                            'type': 'object',
                            'properties': {'label': {'type': 'string'}},
                        },
                    },
                    'nickname': {'type': 'string', 'nullable': True},
                },
            },
        },
        'securitySchemes': {
            'api_key': {'type': 'apiKey', 'in': 'header', 'name': 'X-API-Key'},
            'bearer': {'type': 'http', 'scheme': 'bearer', 'bearerFormat': 'JWT'},
        },
    },
}

# Model names of PETSTORE_SPEC's full IR, in registry order
PETSTORE_MODEL_NAMES = [
    'Category',
    'Error',
    'Inventory',
    'Pet_Owner_Address',
    'Pet_Owner',
    'Pet_Status',
    'Pet_Tags_Item',
    'Pet',
    'UsersControllerGetUserPetResponse_Owner',
]

# A nested object whose synthetic name is also the name of an enum component
ENUM_COLLISION_SPEC = {
    'openapi': '3.1.0',
    'info': {'title': 'Collision API', 'version': '1.0.0'},
    'paths': {
        '/tickets': {
            'get': {
                'operationId': 'listTickets',
                'tags': ['tickets'],
                'responses': {
                    '200': {
                        'description': 'Tickets',
                        'content': {
                            'application/json': {
                                'schema': {
                                    'type': 'array',
                                    'items': {'$ref': '#/components/schemas/Ticket'},
                                }
                            }
                        },
                    }
                },
            }
        }
    },
    'components': {
        'schemas': {
            'Ticket': {
                'type': 'object',
                'properties': {
                    'status': {
                        'type': 'object',
                        'properties': {'code': {'type': 'string'}},
                    }
                },
            },
            'Ticket_Status': {
                'type': 'string',
                'enum': ['open', 'closed'],
            },
        }
    },
}
