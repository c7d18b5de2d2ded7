"""Relational persistence for collections and their memberships."""
