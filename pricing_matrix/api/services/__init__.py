# This file marks the services package that sits between routers and the document store.
# Service modules keep storage details out of transport code, which keeps route tests simple.
