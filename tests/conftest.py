"""Pytest configuration and fixtures."""
import asyncio
from pathlib import Path

import pytest

from mapperbridge.indexer import MapperIndex
from mapperbridge.indexer.exceptions import FileReadError
from mapperbridge.indexer.workspace import ChangeEvent, ChangeKind, matches_any

USER_MAPPER_JAVA = """package com.example.mapper;

import java.util.List;
import org.apache.ibatis.annotations.Param;

/**
 * User Mapper Interface
 */
@Mapper
public interface UserMapper {

    List<User> findAll();

    User findById(@Param("id") Long id);

    void insert(User user);

    // List<User> commentedOut();
    List<User> findByName(String name);
}
"""

USER_MAPPER_XML = """<?xml version="1.0" encoding="UTF-8"?>
<!DOCTYPE mapper PUBLIC "-//mybatis.org//DTD Mapper 3.0//EN" "http://mybatis.org/dtd/mybatis-3-mapper.dtd">
<mapper namespace="com.example.mapper.UserMapper">
  <!-- <select id="commented">SELECT 1</select> -->
  <resultMap id="userResult" type="User">
    <id property="id" column="id"/>
  </resultMap>

  <select id="findAll" resultMap="userResult">
    SELECT * FROM users
  </select>

  <select
      resultType="User"
      id="findById">
    SELECT * FROM users WHERE id = #{id}
  </select>

  <insert id="insert"><![CDATA[
    INSERT INTO users (name) VALUES (#{name}) <select id="fake">
  ]]></insert>

  <sql id="columns">id, name</sql>
</mapper>
"""

USER_SERVICE_JAVA = """package com.example.service;

import com.example.mapper.UserMapper;
import com.example.mapper.OrderMapper;
import com.example.mapper.*;
import java.util.List;

@Service
public class UserService {
    /* private UserMapper fakeMapper; */
    // private UserMapper anotherFake;
    @Autowired
    private UserMapper userMapper;

    private final OrderMapper orderMapper;

    public User getUser(Long id) {
        String log = "userMapper.deleteAll()";
        return userMapper.findById(id);
    }

    public void archive(UserMapper archiveMapper, String name) {
        archiveMapper.insert(name);
        this.orderMapper.findAll();
    }
}
"""

NAMESPACE = "com.example.mapper.UserMapper"
JAVA_URI = "file:///ws/src/main/java/com/example/mapper/UserMapper.java"
XML_URI = "file:///ws/src/main/resources/mapper/UserMapper.xml"
SERVICE_URI = "file:///ws/src/main/java/com/example/service/UserService.java"


class FakeSubscription:
    def __init__(self, workspace, handler):
        self.workspace = workspace
        self.handler = handler

    def dispose(self):
        self.workspace.handlers.remove(self.handler)
        self.workspace.disposed_subscriptions += 1


class FakeWorkspace:
    """In-memory workspace with counters and failure switches."""

    def __init__(self, files=None):
        self.files = dict(files or {})
        self.unreadable = set()
        self.fail_find = None
        self.read_delay = 0.0
        self.find_calls = 0
        self.read_calls = 0
        self.handlers = []
        self.disposed_subscriptions = 0

    async def find_files(self, globs):
        self.find_calls += 1
        await asyncio.sleep(0)
        if self.fail_find is not None:
            raise self.fail_find
        return [
            uri for uri in self.files
            if matches_any(uri.split("://", 1)[-1].lstrip("/"), globs)
        ]

    async def read_text(self, uri):
        self.read_calls += 1
        # content is what the file held when the read started
        content = self.files.get(uri)
        await asyncio.sleep(self.read_delay)
        if uri in self.unreadable or content is None:
            raise FileReadError(uri)
        return content

    def watch(self, globs, handler):
        self.handlers.append(handler)
        return FakeSubscription(self, handler)

    def emit(self, kind: ChangeKind, uri: str):
        for handler in list(self.handlers):
            handler(ChangeEvent(kind, uri))


async def drain(rounds: int = 10):
    """Let scheduled event tasks run to completion."""
    for _ in range(rounds):
        await asyncio.sleep(0)


@pytest.fixture
def workspace():
    """Workspace holding one mapper pair and one service class."""
    return FakeWorkspace({
        JAVA_URI: USER_MAPPER_JAVA,
        XML_URI: USER_MAPPER_XML,
        SERVICE_URI: USER_SERVICE_JAVA,
    })


@pytest.fixture
def index(workspace):
    """Uninitialized index over the fake workspace; disposed after the test."""
    mapper_index = MapperIndex(workspace)
    yield mapper_index
    mapper_index.dispose()


@pytest.fixture
def sample_project(tmp_path):
    """Minimal Maven-style project on disk."""
    java_dir = tmp_path / "src" / "main" / "java" / "com" / "example"
    (java_dir / "mapper").mkdir(parents=True)
    (java_dir / "service").mkdir(parents=True)
    (java_dir / "mapper" / "UserMapper.java").write_text(USER_MAPPER_JAVA, encoding="utf-8")
    (java_dir / "service" / "UserService.java").write_text(USER_SERVICE_JAVA, encoding="utf-8")

    resources = tmp_path / "src" / "main" / "resources" / "mapper"
    resources.mkdir(parents=True)
    (resources / "UserMapper.xml").write_text(USER_MAPPER_XML, encoding="utf-8")

    # Build output must never be indexed
    target = tmp_path / "target" / "classes" / "mapper"
    target.mkdir(parents=True)
    (target / "UserMapper.xml").write_text(USER_MAPPER_XML, encoding="utf-8")

    return Path(tmp_path)
