"""Huddle protocol core: state, identity, bids, auction, reputation"""
